from html import escape
from urllib.parse import quote


class IconResolver:
    """Builds theme icon URLs and ``<img>`` markup for activity icons."""

    def __init__(self, wwwroot: str, theme: str = "boost"):
        self.wwwroot = wwwroot.rstrip("/")
        self.theme = theme

    def image_url(self, icon: str, component: str = "core") -> str:
        return (
            f"{self.wwwroot}/theme/image.php/{quote(self.theme)}/"
            f"{quote(component)}/-1/{quote(icon)}"
        )

    def image_icon(self, icon: str, component: str, alt: str = "") -> str:
        src = escape(self.image_url(icon, component), quote=True)
        escaped_alt = escape(alt, quote=True)
        return (
            f"<img class=\"icon\" alt=\"{escaped_alt}\" "
            f"title=\"{escaped_alt}\" src=\"{src}\" />"
        )
