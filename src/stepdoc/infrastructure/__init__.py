"""Infrastructure: snapshot storage for documents."""
