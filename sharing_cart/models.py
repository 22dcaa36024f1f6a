from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields


class TreeShapeError(ValueError):
    """Raised when a cart tree does not have the directory/leaf shape."""


@dataclass
class CartItem:
    id: int | str
    modname: str = ""
    modtext: str = ""
    modicon: str | None = None
    fileid: int | None = None
    filename: str = ""
    coursefullname: str = ""
    uninstalled_plugin: bool = False
    tree: str = ""  # slash separated directory path inside the cart

    @property
    def is_copying(self) -> bool:
        # The backup file is created asynchronously; until then fileid is unset.
        return self.fileid is None or self.fileid < 1

    @classmethod
    def from_dict(cls, record: Mapping) -> "CartItem":
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in record.items() if key in known}
        if "id" not in values:
            raise TreeShapeError("Cart item record has no id")
        if values.get("fileid") is not None:
            values["fileid"] = int(values["fileid"])
        values["uninstalled_plugin"] = bool(values.get("uninstalled_plugin", False))
        for key in ("modname", "modtext", "filename", "coursefullname", "tree"):
            if values.get(key) is None:
                values[key] = ""
        return cls(**values)


@dataclass
class LeafNode:
    items: list[CartItem] = field(default_factory=list)


@dataclass
class DirectoryNode:
    name: str = ""
    children: list["DirectoryNode | LeafNode"] = field(default_factory=list)

    def leaf_items(self) -> list[CartItem]:
        items: list[CartItem] = []
        for child in self.children:
            if isinstance(child, LeafNode):
                items.extend(child.items)
        return items

    def subdirectory(self, name: str) -> "DirectoryNode":
        """Return the child directory called ``name``, creating it at the end if needed."""
        for child in self.children:
            if isinstance(child, DirectoryNode) and child.name == name:
                return child
        directory = DirectoryNode(name=name)
        self.children.append(directory)
        return directory

    def leaf(self) -> LeafNode:
        for child in self.children:
            if isinstance(child, LeafNode):
                return child
        leaf = LeafNode()
        self.children.append(leaf)
        return leaf


def build_tree(items: Iterable[CartItem]) -> DirectoryNode:
    """Group flat cart entries into directories following their ``tree`` path.

    Directories and the leaf bucket keep the order in which they were first
    seen, which is the order the cart is displayed in.
    """
    root = DirectoryNode()
    for item in items:
        node = root
        for segment in item.tree.split("/"):
            if segment:
                node = node.subdirectory(segment)
        node.leaf().items.append(item)
    return root


def _to_item(value) -> CartItem:
    if isinstance(value, CartItem):
        return value
    if isinstance(value, Mapping):
        return CartItem.from_dict(value)
    raise TreeShapeError(f"Expected a cart item, got {type(value).__name__}")


def from_mapping(mapping: Mapping, name: str = "") -> DirectoryNode:
    """Convert the nested ``{'': [items], 'dir': {...}}`` shape into nodes."""
    if not isinstance(mapping, Mapping):
        raise TreeShapeError(
            f"Directory {name or '/'!r} must be a mapping, got {type(mapping).__name__}"
        )

    directory = DirectoryNode(name=name)
    for key, value in mapping.items():
        if key == "":
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise TreeShapeError(
                    f"Items of {name or '/'!r} must be a sequence, got {type(value).__name__}"
                )
            directory.children.append(LeafNode(items=[_to_item(item) for item in value]))
        else:
            directory.children.append(from_mapping(value, str(key)))
    return directory
