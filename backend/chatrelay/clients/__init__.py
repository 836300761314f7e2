from .result import ChatResult, ErrorKind, Failure, Success
from .base import ChatAdapter, ChatRequest, HttpChatAdapter, ProviderConfig, TimeoutPolicy
from .gemini_client import GeminiRestAdapter
from .gemini_sdk_client import GeminiSdkAdapter
from .deepseek_client import DeepSeekAdapter
from .openrouter_client import OpenRouterAdapter
from .factory import PROVIDERS, get_adapter

__all__ = [
    'ChatResult','ErrorKind','Failure','Success',
    'ChatAdapter','ChatRequest','HttpChatAdapter','ProviderConfig','TimeoutPolicy',
    'GeminiRestAdapter','GeminiSdkAdapter','DeepSeekAdapter','OpenRouterAdapter',
    'PROVIDERS','get_adapter',
]
