"""Remove tracking parameters from copied links."""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PREFIXES = ("utm_", "fbclid", "gclid", "mc_")


def clean_url(url):
    parts = urlsplit(url)
    if not parts.scheme.startswith("http"):
        return url
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if not key.startswith(TRACKING_PREFIXES)
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


def clean_text(data):
    lines = data.decode("utf-8", errors="replace").split("\n")
    return "\n".join(clean_url(line.strip()) if "://" in line else line for line in lines)


class StripTracking:
    name = "Strip tracking"
    author = "clipscript"
    description = "Drops utm_* and similar parameters from URLs"
    formatsToSave = ["text/plain", "text/uri-list"]

    def transformItemData(self, item):
        changed = False
        for mime in ("text/plain", "text/uri-list"):
            if mime in item:
                cleaned = clean_text(item[mime])
                if cleaned.encode("utf-8") != item[mime]:
                    item[mime] = cleaned
                    changed = True
        if changed:
            print("removed tracking parameters")
            return item
        return None

    def copyItem(self, item):
        return self.transformItemData(item)


def clipscript_plugin():
    return StripTracking()
