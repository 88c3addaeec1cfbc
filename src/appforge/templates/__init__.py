"""
appforge.templates - Template Assets
====================================

This package holds the static text assets copied into generated projects.
Assets end with ``.tmpl``; the output file name is the asset name without
that suffix.

Layout
------
base/
    Files every project receives: main.ts, server.ts, package.json,
    vite.config.ts, tsconfig.json, tsconfig.server.json and global.css.

blank/, calculator/, form/, chart/
    One directory per registry key holding mcp-app.html, mcp-app.ts and
    mcp-app.css. A file missing here is taken from base/.

snippets/
    Jinja2 templates rendered by the generator (``.j2``). These are not
    project assets.

Placeholders
------------
Assets use ``{{NAME}}``, ``{{DISPLAY_NAME}}``, ``{{DESCRIPTION}}``,
``{{TOOL_NAME}}``, ``{{VERSION}}`` and ``{{AUTHOR}}``. They are replaced
textually by ``appforge.placeholders.substitute``, not by Jinja2, so
TypeScript template literals and CSS braces need no escaping.
"""
