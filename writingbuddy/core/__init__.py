"""Writing session state, goals and the markdown entry writer."""
