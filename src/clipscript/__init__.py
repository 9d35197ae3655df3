"""clipscript - Script-extensible item plugins for clipboard managers.

User scripts are loaded at runtime, each in its own isolated context, and
wrap the host's built-in saver to transform items as they are copied or
stored.

Key modules:

- :mod:`clipscript.scripting` - Script contexts, member resolution, message bridge
- :mod:`clipscript.plugins` - Item loaders, savers and plugin discovery
- :mod:`clipscript.items` - Item records and script value conversion
- :mod:`clipscript.config` - YAML configuration
"""

__version__ = "0.1.0"
