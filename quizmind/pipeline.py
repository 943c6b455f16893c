# pipeline.py :: Pipeline for GenAI hint providers (with debug logging)

import logging
import requests
import json
import time
from urllib.parse import urljoin

logger = logging.getLogger(__name__)

# Marker prefixed to every provider-side failure returned by ModelProvider.request()
ERROR_MARKER = "!!ERROR!!"


# --- Request Maker Base ---
class ModelRequestMaker:
    def url_chat(self, base_url, model=None):
        raise NotImplementedError("url_chat() must be overridden")

    def package(self, model, prompt, **kwargs):
        raise NotImplementedError("package() must be overridden")

    def unpackage(self, response):
        raise NotImplementedError("unpackage() must be overridden")

    def headers(self, api_key):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers


# --- Ollama ---
class OllamaRequest(ModelRequestMaker):
    def url_chat(self, base_url, model=None):
        return urljoin(base_url, '/api/generate')

    def package(self, model, prompt, **kwargs):
        payload = {
            "model": model,
            "prompt": prompt,
            "stream": False,
        }
        if kwargs:
            payload["options"] = kwargs
        return payload

    def unpackage(self, response):
        return response.get('response')


# --- OpenAI (official API); Open WebUI speaks the same chat dialect ---
class OpenAIRequest(ModelRequestMaker):
    def url_chat(self, base_url, model=None):
        return f"{base_url}/chat/completions"

    def package(self, model, prompt, **kwargs):
        messages = [{"role": "user", "content": prompt}]
        return {
            "model": model,
            "messages": messages,
            **kwargs
        }

    def unpackage(self, response):
        choices = response.get('choices', [])
        if choices:
            return choices[0].get('message', {}).get('content')
        return None


class OpenWebUIRequest(OpenAIRequest):
    def url_chat(self, base_url, model=None):
        return urljoin(base_url, '/api/chat/completions')


# --- Google Gemini (Generative Language REST API) ---
class GeminiRequest(ModelRequestMaker):
    def url_chat(self, base_url, model=None):
        return f"{base_url}/v1beta/models/{model}:generateContent"

    def package(self, model, prompt, **kwargs):
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        if kwargs:
            payload["generationConfig"] = kwargs
        return payload

    def unpackage(self, response):
        candidates = response.get('candidates', [])
        if not candidates:
            return None
        parts = candidates[0].get('content', {}).get('parts', [])
        text = "".join(part.get('text', '') for part in parts)
        return text or None

    def headers(self, api_key):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-goog-api-key"] = api_key
        return headers


# --- ModelProvider with debug logging ---
class ModelProvider:
    makers = {
        'ollama': OllamaRequest,
        'open-webui': OpenWebUIRequest,
        'openai': OpenAIRequest,
        'gemini': GeminiRequest,
    }

    def __init__(self, base_url, type=None, api_key=None, model=None, timeout=30):
        self.base_url = base_url.rstrip('/')
        self.api_key   = api_key
        self.model     = model
        self.timeout   = timeout

        if type not in self.makers:
            raise ValueError(f"Unsupported provider: {type}")
        self.req_maker = self.makers[type]()
        self.type = type
        self.delta = -1

    def _call(self, url, payload):
        headers = self.req_maker.headers(self.api_key)

        start = time.time()
        resp = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        self.delta = round(time.time() - start, 3)

        logger.debug("← %s from %s %s (%.3fs)",
                     resp.status_code, resp.request.method, resp.request.url, self.delta)
        return resp

    def request(self, prompt, **kwargs):
        url     = self.req_maker.url_chat(self.base_url, self.model)
        payload = self.req_maker.package(self.model, prompt, **kwargs)

        logger.debug("→ POST to: %s", url)
        logger.debug("→ payload: %s", json.dumps(payload))

        resp = self._call(url, payload)
        if resp.status_code in (401, 403):
            return f"{ERROR_MARKER} Authentication failed (check your API key)"
        if resp.status_code != 200:
            return f"{ERROR_MARKER} HTTP {resp.status_code}: {resp.text}"
        return self.req_maker.unpackage(resp.json())

    def __repr__(self):
        return f"ModelProvider(type={self.type!r}, base_url={self.base_url!r}, model={self.model!r})"
