"""Configuration, run decisions, conditions and Deployment checks for CSI driver operators."""

__version__ = "0.1.0"

__all__ = [
    "aws",
    "azure",
    "conditions",
    "config",
    "deployment",
    "gcp",
    "hypershift",
    "ibm",
    "onprem",
    "openstack",
    "replacer",
    "starter",
]