"""Metadata-only plugin: keeps HTML and Markdown payloads when saving."""


def clipscript_plugin():
    return {
        "name": lambda: "Tab tools",
        "author": "clipscript",
        "formatsToSave": lambda: ["text/html", "text/markdown"],
    }
