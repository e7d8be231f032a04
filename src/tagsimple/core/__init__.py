"""Core conversion, stream and facade modules of tagsimple."""
