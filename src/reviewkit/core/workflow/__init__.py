"""Review wizard: step layout, validation gate, role check and state machine."""
