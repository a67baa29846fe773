"""Internal helpers shared by the Result and AsyncResult combinators."""
