"""Decoder factory: builds the Decoder from settings."""
from __future__ import annotations

from dispatch_client.config.settings import Settings
from dispatch_client.infrastructure.decoding.json_decoder import JsonDecoder
from dispatch_client.ports.decoder import Decoder


def create_decoder(settings: Settings) -> Decoder:
    return JsonDecoder(date_decoding=settings.date_decoding)
