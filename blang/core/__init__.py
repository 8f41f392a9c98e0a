"""The lexer -> parser -> evaluator pipeline and the runtime value model. Nothing in here does I/O."""
