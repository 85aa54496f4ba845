"""AWS client factories and multi-step workflows."""
