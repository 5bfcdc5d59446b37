"""Click commands registered on the pipekit group."""
