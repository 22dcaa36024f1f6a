from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StoredFile:
    contextid: int
    component: str
    filearea: str
    itemid: int | None
    filepath: str
    filename: str


class FileStore:
    """Backup files (.mbz) of one user's sharing cart, stored under ``root``."""

    def __init__(self, root: Path, contextid: int, component: str = "user", filearea: str = "backup"):
        self.root = Path(root)
        self.contextid = contextid
        self.component = component
        self.filearea = filearea

    def resolve_path(self, filename: str) -> Path:
        if not filename:
            raise ValueError("Filename is required")
        if Path(filename).is_absolute():
            raise ValueError("Filename must be relative to the storage root")

        root = self.root.resolve()
        full_path = (root / filename).resolve()
        if root not in full_path.parents:
            raise ValueError("Filename escapes storage root")

        return full_path

    def get(self, filename: str) -> StoredFile:
        filepath = self.resolve_path(filename)
        if not filepath.is_file():
            raise FileNotFoundError(f"Backup file {filename} does not exist")

        relative = filepath.relative_to(self.root.resolve())
        directory = "/".join(relative.parts[:-1])
        return StoredFile(
            contextid=self.contextid,
            component=self.component,
            filearea=self.filearea,
            itemid=None,
            filepath=f"/{directory}/" if directory else "/",
            filename=relative.name,
        )
