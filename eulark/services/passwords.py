"""
Hash des mots de passe (bcrypt).

- `hash_password` : sel aléatoire + coût (`rounds`) figé dans le hash produit.
- `verify_password` : comparaison à temps constant assurée par `bcrypt.checkpw`.
  Un hash stocké illisible est traité comme un mot de passe faux.
"""
import bcrypt


def hash_password(pw: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
