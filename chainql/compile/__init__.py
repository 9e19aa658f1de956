"""chainql compilation layer: builder state → parameterized SQL."""
from chainql.compile.base import CompiledSQL, SQLDialect
from chainql.compile.builder import StatementCompiler
from chainql.compile.context import CompilationContext
from chainql.compile.quoting import IdentifierQuoter
from chainql.compile.registry import DialectFactory

__all__ = [
    "CompiledSQL",
    "SQLDialect",
    "StatementCompiler",
    "CompilationContext",
    "IdentifierQuoter",
    "DialectFactory",
]
