"""Invoice portal components: token validation, access gating, artifact
freshness, document streaming and action relaying."""
