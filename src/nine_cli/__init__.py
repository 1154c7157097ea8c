"""
nine_cli: inspect NineCluster resources in a Kubernetes cluster.

Lists NineClusters, the readiness of their project workloads (StatefulSets
and CloudNativePG clusters), and the auxiliary tools installed next to them,
with the endpoints those tools are reachable at.
"""

__version__ = "0.1.0"
