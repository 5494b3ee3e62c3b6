"""Shared Kernel DTOs - Application Layer"""

from src.service.shared_kernel.app.dto.decode_result import DecodeResult, DecodeWarning

__all__ = ['DecodeResult', 'DecodeWarning']
