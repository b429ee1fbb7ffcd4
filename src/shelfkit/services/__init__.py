"""Service layer — catalog orchestration returning ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from output.
"""
