"""
Deterministic identicon avatars.

A seed is hashed with BLAKE2s; the digest picks the colours and which
cells of a horizontally mirrored grid are filled. Same seed, same SVG.
"""

from .integrity.hashing import seed_digest
from .picture.model import CONTENT_LENGTH, CONTENT_TYPE, byte_length


SVG_CONTENT_TYPE = 'image/svg+xml'

BACKGROUND = '#f0f0f0'


class IdenticonAvatarGenerator:
    """
    Renders a symmetric grid avatar as SVG.
    
    Args:
        grid: number of cells per side (at most 8)
        cell: size of one cell in SVG units
    """
    
    def __init__(self, grid: int = 5, cell: int = 10):
        if not 1 <= grid <= 8:
            raise ValueError(f"grid must be between 1 and 8, got {grid}")
        self.grid = grid
        self.cell = cell
    
    def generate(self, seed: str) -> tuple[str, int]:
        """
        Render the avatar for a seed.
        
        Returns the SVG text and its length in bytes.
        """
        digest = seed_digest(seed)
        body = self._render(digest)
        return body, byte_length(body)
    
    def picture_for(self, username: str) -> dict:
        """Avatar for a username as a composite picture."""
        body, length = self.generate(username or '')
        return {
            'head': {
                CONTENT_TYPE: SVG_CONTENT_TYPE,
                CONTENT_LENGTH: length,
            },
            'body': body,
        }
    
    def _cells(self, digest: str) -> list[tuple[int, int]]:
        half = (self.grid + 1) // 2
        filled = []
        for row in range(self.grid):
            for col in range(half):
                nibble = int(digest[row * half + col], 16)
                if nibble % 2 == 0:
                    filled.append((row, col))
                    mirror = self.grid - 1 - col
                    if mirror != col:
                        filled.append((row, mirror))
        return filled
    
    def _render(self, digest: str) -> str:
        size = (self.grid + 2) * self.cell
        hue = int(digest[-6:-3], 16) % 360
        foreground = f"hsl({hue},55%,50%)"
        
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size} {size}" '
            f'width="{size}" height="{size}">',
            f'<rect width="{size}" height="{size}" fill="{BACKGROUND}"/>',
        ]
        for row, col in sorted(self._cells(digest)):
            x = (col + 1) * self.cell
            y = (row + 1) * self.cell
            parts.append(
                f'<rect x="{x}" y="{y}" width="{self.cell}" height="{self.cell}" '
                f'fill="{foreground}"/>'
            )
        
        # happy mouth along the lower third
        left = 2 * self.cell
        right = size - 2 * self.cell
        base = size - 3 * self.cell
        parts.append(
            f'<path d="M{left} {base} Q{size // 2} {base + 2 * self.cell} {right} {base}" '
            f'stroke="#333" stroke-width="{max(1, self.cell // 4)}" fill="none"/>'
        )
        parts.append('</svg>')
        return ''.join(parts)
