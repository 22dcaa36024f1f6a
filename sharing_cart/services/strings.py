from pathlib import Path
import json


DEFAULT_STRINGS = {
    "download": "Download",
    "downloadfile": "Download file",
    "label_image_replaced_text": "[Image]",
    "missing_capability": "You are missing the following capability to restore items: {$a}",
    "missing_capabilities": "You are missing the following capabilities to restore items: {$a}",
    "uninstalled_plugin_warning_title": "The plugin {$a} is not installed on this site",
    "variouscourse": "from various courses",
}


class MissingStringError(KeyError):
    """Raised when a string key is not defined in the catalog."""


class StringCatalog:
    def __init__(self, strings: dict[str, str] | None = None):
        self._strings = dict(DEFAULT_STRINGS)
        if strings:
            self._strings.update(strings)

    @classmethod
    def from_file(cls, path: Path) -> "StringCatalog":
        """Load a JSON object of string overrides on top of the defaults."""
        overrides = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(overrides, dict):
            raise ValueError(f"String file {path} must contain a JSON object")
        return cls({str(key): str(value) for key, value in overrides.items()})

    def get_string(self, key: str, a=None) -> str:
        try:
            text = self._strings[key]
        except KeyError:
            raise MissingStringError(key) from None
        if a is not None:
            text = text.replace("{$a}", str(a))
        return text
