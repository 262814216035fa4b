"""Chat completion client for the Lua scripting assistant."""
import logging
import time

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert Lua scripting assistant specialized in Growtopia Private Server (Growsoft).
Your knowledge includes:
- Growsoft Lua API functions and events
- Packet handling and hook systems
- Game mechanics and automation
- Lua best practices and optimization

Guidelines:
1. Always provide accurate, working Lua code examples
2. Explain concepts clearly with practical examples
3. Focus on Growsoft-specific implementations
4. Include error handling and best practices
5. When unsure, suggest checking official documentation

Format responses with clear explanations and code blocks."""

DEFAULT_INSTRUCTION = 'You are a Lua scripting assistant specialized in Growsoft (Growtopia Private Server).'
DOCS_CONTEXT = 'growtopia-lua-growsoft'
EMPTY_REPLY = 'No response generated.'
ALLOWED_ROLES = ('user', 'assistant', 'system')

FALLBACK_REPLIES = [
    "I understand you need help with Lua scripting. Unfortunately, I'm having trouble accessing "
    "my full capabilities right now. You might want to check the documentation or try again later.",
    "As a Growsoft Lua assistant, I typically help with script generation and debugging. "
    "Please try your request again in a moment.",
    "For Lua scripting help, you can check the documentation section for API references and "
    "examples while I work on getting back to full functionality.",
]


class CompletionError(Exception):
    """Completion provider unavailable or failed."""


def normalize_messages(messages):
    """Validate chat history and keep only role and content."""
    if not isinstance(messages, list):
        raise ValueError("messages must be a list")
    normalized = []
    for msg in messages:
        if not isinstance(msg, dict):
            raise ValueError("Each message must be an object")
        role = msg.get('role')
        content = msg.get('content')
        if role not in ALLOWED_ROLES:
            raise ValueError(f"Unsupported message role: {role!r}")
        if not isinstance(content, str):
            raise ValueError("Message content must be a string")
        normalized.append({'role': role, 'content': content})
    return normalized


class AIClient:
    """Thin wrapper around an OpenAI compatible chat completions API."""

    def __init__(self, api_key, model, base_url=None, temperature=0.7, max_tokens=2000, docs_loader=None,
                 docs_paths=()):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.docs_loader = docs_loader
        self.docs_paths = list(docs_paths)
        self._client = None

    @classmethod
    def from_config(cls, config, docs_loader=None):
        """Build a client from a Flask config mapping."""
        return cls(
            api_key=config.get('OPENAI_API_KEY'),
            model=config.get('OPENAI_MODEL'),
            base_url=config.get('OPENAI_BASE_URL'),
            temperature=config.get('OPENAI_TEMPERATURE', 0.7),
            max_tokens=config.get('OPENAI_MAX_TOKENS', 2000),
            docs_loader=docs_loader,
            docs_paths=config.get('DOCS_CONTEXT_PATHS', ()),
        )

    @property
    def configured(self):
        return bool(self.api_key)

    def _get_client(self):
        if not self.configured:
            raise CompletionError('OpenAI API key not configured')
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def system_prompt(self, context=None):
        """System instruction, with a docs digest for the Growsoft context."""
        prompt = SYSTEM_PROMPT
        if context == DOCS_CONTEXT and self.docs_loader is not None:
            docs = self.docs_loader.docs_context(self.docs_paths)
            if docs:
                prompt += f"\n\nRelevant Documentation:\n{docs}"
        return prompt

    def _complete(self, messages, max_tokens=None):
        client = self._get_client()
        t0 = time.perf_counter()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=max_tokens or self.max_tokens,
                stream=False,
            )
        except OpenAIError as e:
            raise CompletionError(str(e)) from e
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        text = ''
        if resp.choices:
            text = resp.choices[0].message.content or ''
        logger.info("Completion model=%s messages=%d reply_chars=%d elapsed_ms=%.1f",
                    self.model, len(messages), len(text), elapsed_ms)
        return text

    def generate_reply(self, messages, context=None):
        """Answer a chat conversation.

        Raises ValueError for malformed history and CompletionError when the
        provider is unavailable.
        """
        history = normalize_messages(messages)
        chat = [{'role': 'system', 'content': self.system_prompt(context)}] + history
        return self._complete(chat) or EMPTY_REPLY

    def generate_content(self, prompt, context=None):
        """One-shot generation that reports failure instead of raising."""
        try:
            content = self._complete(
                [
                    {'role': 'system', 'content': context or DEFAULT_INSTRUCTION},
                    {'role': 'user', 'content': prompt},
                ],
                max_tokens=min(1000, self.max_tokens),
            )
        except CompletionError as e:
            logger.error("Completion failed: %s", e)
            return {'success': False, 'content': '', 'error': str(e)}
        return {'success': True, 'content': content}
