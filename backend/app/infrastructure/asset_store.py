"""Local Asset Store — byte-level file access rooted under the public directory.

Invariants:
    - Relative paths resolve under root; absolute paths (upload temp files) are used as-is
    - Blocking filesystem calls run in a worker thread, never on the event loop
    - Errors surface as the underlying OSError; callers decide the domain error
"""

import asyncio
from pathlib import Path


class LocalAssetStore:
    """AssetStore implementation on the local filesystem."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    async def read_bytes(self, path: str) -> bytes:
        return await asyncio.to_thread(self.resolve(path).read_bytes)

    async def write_bytes(self, path: str, data: bytes) -> None:
        target = self.resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        await asyncio.to_thread(_write)

    async def delete(self, path: str) -> None:
        await asyncio.to_thread(self.resolve(path).unlink)

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self.resolve(path).is_file)
