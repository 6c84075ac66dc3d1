from typing import Protocol


class VisionPort(Protocol):
    def generate_text(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        ...
