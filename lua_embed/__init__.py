"""
lua-embed — build-time embedding of Lua scripts into generated source files.

A Lua script is escaped into a string-literal expression and substituted
into a template (``CoronaLua.java.template`` → ``CoronaLua.java``) so the
host build can compile the script text into the application.
"""

from lua_embed.generator import GenerationJob, GenerationResult, GeneratorOptions, generate

__all__ = ["generate", "GenerationJob", "GenerationResult", "GeneratorOptions"]

__version__ = "0.1.0"
