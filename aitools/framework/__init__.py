"""Project framework utilities.

Structural helpers shared by every command: typed configuration, request
validation, error types, and artifact writing/indexing. Command flows live in
`aitools.app`; SDK adapters live in `aitools.backends`.

Common entrypoints:

- `aitools.framework.artifacts`: naming, rendering and the library index
- `aitools.framework.config`: `ToolConfig.from_dict`
"""
