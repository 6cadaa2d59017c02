"""Core OAuth engine: crypto, state codec, request builder, token/profile/revocation clients."""
