from .stack import VpcEndpointStack

__all__ = ["VpcEndpointStack"]
