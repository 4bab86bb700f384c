# =========================================================================
# MLS PROVIDER EXCEPTIONS
# =========================================================================

class MLSError(Exception):
    """Base exception for MLS provider errors"""
    pass

class MLSAPIError(MLSError):
    """API request failed"""
    pass

class MLSAuthError(MLSAPIError):
    """Authentication/authorization failure"""
    pass

class MLSRateLimitError(MLSAPIError):
    """Rate limit exceeded"""
    pass

class MLSConfigError(MLSError):
    """Provider credentials are not configured"""
    pass
