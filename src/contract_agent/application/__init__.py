"""
application - Request context, DTOs and the contract service.

Depends on domain/ only.
"""
