"""Application layer: parking service, DTOs and the command language."""
