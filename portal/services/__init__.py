"""Business logic services: one module per API area plus outbound collaborators."""
