"""
Error types for the wormhole package.

Query operations never raise for unknown identifiers or an empty corpus,
so the hierarchy only covers fingerprinting and configuration failures.
"""

from typing import Optional, Any, Dict


class WormholeError(Exception):
    """
    Base exception for all wormhole errors.
    
    Carries a structured ``details`` mapping for reporting.
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize wormhole error.
        
        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FingerprintError(WormholeError):
    """Raised when source text cannot be reduced to a structural fingerprint."""
    
    def __init__(self, message: str,
                 origin: Optional[str] = None,
                 line_number: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize fingerprint error.
        
        Args:
            message: Error message
            origin: File or label of the code that failed
            line_number: Line where parsing failed, if known
            details: Additional error context
        """
        super().__init__(message, details)
        self.origin = origin
        self.line_number = line_number
        
        self.details.update({
            'origin': origin,
            'line_number': line_number
        })


class ConfigurationError(WormholeError):
    """Raised when a configuration file cannot be read or parsed."""
    
    def __init__(self, message: str,
                 config_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.config_path = config_path
        self.details['config_path'] = config_path
