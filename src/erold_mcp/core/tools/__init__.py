"""
MCP tool handlers. Every public coroutine whose first parameter is `client`
(or `guidelines`) is discovered by erold_mcp.core.registry and exposed as a
tool under its function name.
"""
