from urllib.parse import quote


def make_pluginfile_url(
    wwwroot: str,
    contextid: int,
    component: str,
    filearea: str,
    itemid: int | None,
    filepath: str,
    filename: str,
    forcedownload: bool = False,
) -> str:
    path = f"/{contextid}/{component}/{filearea}"
    if itemid is not None:
        path += f"/{itemid}"
    path += (filepath or "/") + filename

    url = f"{wwwroot.rstrip('/')}/pluginfile.php{quote(path)}"
    if forcedownload:
        url += "?forcedownload=1"
    return url
