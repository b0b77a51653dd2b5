"""
Password hashing with bcrypt.
"""

import bcrypt


class BcryptPasswordHasher:
    """Hashes and verifies passwords; hashes are self-describing bcrypt strings."""
    
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
    
    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password with a fresh salt."""
        return bcrypt.hashpw(plaintext.encode('utf-8'), bcrypt.gensalt(self.rounds)).decode('ascii')
    
    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check a plaintext against a stored hash.
        
        An empty or malformed hash never matches.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            return False
