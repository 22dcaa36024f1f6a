from collections.abc import Callable, Mapping
from functools import partial
from pathlib import Path
import logging

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from sharing_cart.config import Settings
from sharing_cart.models import CartItem, DirectoryNode, LeafNode, from_mapping
from sharing_cart.renderers.markup import html_to_text, replace_image_with_string, shorten, strip_label
from sharing_cart.services.capabilities import RESTORE_ACTIVITY, RESTORE_COURSE, RequiredCapabilities
from sharing_cart.services.file_store import FileStore, StoredFile
from sharing_cart.services.icons import IconResolver
from sharing_cart.services.strings import StringCatalog
from sharing_cart.services.urls import make_pluginfile_url

log = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)

REQUIRED_CAPABILITIES = [RESTORE_COURSE, RESTORE_ACTIVITY]


def _render(template: str, **context) -> str:
    return environment.get_template(f"cart/{template}").render(**context)


def _segments(path: str) -> list[str]:
    return [segment for segment in path.strip("/").split("/") if segment]


class TreeRenderer:
    """Renders a sharing cart tree as nested ``<ul>``/``<li>`` markup.

    All host services are passed in: ``capability_checker`` answers
    ``has_capability(name)``, ``files`` resolves backup files with
    ``get(filename)``, ``strings`` looks up display strings and ``icons``
    builds theme icon markup.
    """

    def __init__(
        self,
        capability_checker,
        strings: StringCatalog,
        files,
        icons: IconResolver,
        url_builder: Callable[..., str] | None = None,
        format_string: Callable[[str], str] | None = None,
        id_prefix: str = "block_sharing_cart",
    ):
        self.capability_checker = capability_checker
        self.strings = strings
        self.files = files
        self.icons = icons
        self.url_builder = url_builder or partial(make_pluginfile_url, icons.wwwroot)
        self.format_string = format_string or (lambda text: text)
        self.id_prefix = id_prefix

    @classmethod
    def from_settings(cls, settings: Settings, capability_checker) -> "TreeRenderer":
        strings = StringCatalog.from_file(settings.lang_file) if settings.lang_file else StringCatalog()
        return cls(
            capability_checker=capability_checker,
            strings=strings,
            files=FileStore(settings.storage_root, settings.user_context_id),
            icons=IconResolver(settings.wwwroot, settings.theme),
            url_builder=partial(make_pluginfile_url, settings.wwwroot),
            id_prefix=settings.id_prefix,
        )

    def render_tree(self, tree: DirectoryNode | Mapping) -> str:
        if not isinstance(tree, DirectoryNode):
            tree = from_mapping(tree)

        required = RequiredCapabilities.init(self.capability_checker, REQUIRED_CAPABILITIES)
        alert = ""
        if required.disallowed_actions():
            missing_key = (
                "missing_capabilities"
                if required.total_capabilities_missing() > 1
                else "missing_capability"
            )
            alert = _render(
                "alert.html",
                actions=required.disallowed_actions(),
                message=self.strings.get_string(missing_key, ", ".join(required.missing_capabilities())),
            )

        body = self.render_node(tree, "/")
        log.debug("Rendered sharing cart tree with %d disallowed actions", len(required.disallowed_actions()))
        return _render("tree.html", alert=Markup(alert), body=Markup(body))

    def render_node(self, node: DirectoryNode, path: str) -> str:
        parts: list[str] = []
        for child in node.children:
            if isinstance(child, DirectoryNode):
                child_path = path.rstrip("/") + "/" + child.name
                parts.append(self.render_dir_open(child_path, child))
                parts.append(self.render_node(child, child_path))
                parts.append(self.render_dir_close())
            elif isinstance(child, LeafNode):
                for item in child.items:
                    # Empty sections keep a placeholder item so the folder is shown.
                    if not item.modname:
                        continue
                    parts.append(self.render_item(path, item))
            else:
                raise TypeError(f"Unexpected tree node {type(child).__name__}")
        return "".join(parts)

    def course_suffix(self, items: list[CartItem]) -> str:
        coursefullnames: list[str] = []
        for item in items:
            if item.coursefullname and item.coursefullname not in coursefullnames:
                coursefullnames.append(item.coursefullname)

        if len(coursefullnames) == 1:
            return f" [{coursefullnames[0]}]"
        if len(coursefullnames) > 1:
            return f" [{self.strings.get_string('variouscourse')}]"
        return ""

    def render_dir_open(self, path: str, node: DirectoryNode) -> str:
        items = node.leaf_items()
        is_ready = not any(item.is_copying for item in items)
        components = path.strip("/").split("/")

        classes = "directory sharing-cart-item"
        if not is_ready:
            classes += " copying text-muted"

        return _render(
            "directory_open.html",
            classes=classes,
            path=path,
            copying="0" if is_ready else "1",
            depth=len(components) - 1,
            title=path + self.course_suffix(items),
            label=self.format_string(components[-1]),
        )

    def render_dir_close(self) -> str:
        return _render("directory_close.html")

    def render_item(self, path: str, item: CartItem) -> str:
        is_copying = item.is_copying
        stored = self._find_file(item)
        missing_file = stored is None and not is_copying
        disabled = is_copying or item.uninstalled_plugin or missing_file

        classes = [item.modname, f"modtype_{item.modname}"]
        if item.uninstalled_plugin or missing_file:
            classes.append("disabled")
        if is_copying:
            classes.extend(["text-muted", "copying"])
        if not disabled and not is_copying:
            classes.append("text-dark")

        coursename = f" [{item.coursefullname}]" if item.coursefullname else ""
        title = html_to_text(item.modtext) + coursename

        text = item.modtext
        if item.modname == "label":
            text = strip_label(text)
            text = replace_image_with_string(text, self.strings.get_string("label_image_replaced_text"))
        text = shorten(text)

        return _render(
            "item.html",
            classes=" ".join(classes),
            dom_id=f"{self.id_prefix}-item-{item.id}",
            item_id=item.id,
            disable_copy=int(disabled),
            is_copying=int(is_copying),
            depth=len(_segments(path)),
            title=title,
            icon=Markup(self.render_modicon(item)),
            text=Markup(text),
            download=Markup(self.render_download(stored) if stored else ""),
        )

    def _find_file(self, item: CartItem) -> StoredFile | None:
        try:
            return self.files.get(item.filename)
        except (FileNotFoundError, ValueError) as exc:
            if item.is_copying:
                log.debug("Backup of cart item %s is not ready yet: %s", item.id, exc)
            else:
                log.warning("Backup file of cart item %s cannot be resolved: %s", item.id, exc)
            return None

    def render_download(self, stored: StoredFile) -> str:
        url = self.url_builder(
            stored.contextid,
            stored.component,
            stored.filearea,
            stored.itemid,
            stored.filepath,
            stored.filename,
            forcedownload=True,
        )
        return _render(
            "download.html",
            url=url,
            title=self.strings.get_string("downloadfile"),
            alt=self.strings.get_string("download"),
        )

    def render_modicon(self, item: CartItem) -> str:
        if item.uninstalled_plugin:
            return _render(
                "uninstalled_icon.html",
                title=self.strings.get_string("uninstalled_plugin_warning_title", f"mod_{item.modname}"),
            )

        if item.modicon:
            if item.modicon.startswith("mod/"):
                modname, _, iconname = item.modicon[len("mod/"):].partition("/")
                return self.icons.image_icon(iconname or "icon", modname)
            return self.icons.image_icon(item.modicon, "modicon")

        return _render("activity_icon.html", src=self.icons.image_url("icon", item.modname))
