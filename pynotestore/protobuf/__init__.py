"""Apple Notes protobuf schema."""
