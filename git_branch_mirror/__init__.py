"""Mirror branches from a source repository tree into a target repository tree, following submodules."""
