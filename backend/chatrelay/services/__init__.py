from chatrelay.services.relay import relay_chat, error_payload, server_error_payload

__all__ = ["relay_chat", "error_payload", "server_error_payload"]
