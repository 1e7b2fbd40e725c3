"""scaffold/ -- Copies the backend template into a new project directory.

Quick usage::

    from pathlib import Path
    from scaffold.generator import copy_template, install_dependencies

    target = Path("my-api")
    copy_template(target)
    install_dependencies(target)

Layer rule: scaffold/ imports only stdlib. It finds the api/, auth/ and
core/ packages next to itself on disk and never imports them.
"""
