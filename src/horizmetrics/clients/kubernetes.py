#!/usr/bin/env python3
"""
Pod lister backed by the Kubernetes API
"""

import os
from typing import List, Optional
from kubernetes import client
from kubernetes import config as k8s_config

from ..config.settings import KubernetesSettings
from ..core.logging_config import get_logger
from .base import PodLister

logger = get_logger(__name__)


def load_kubernetes_config(kube_settings: Optional[KubernetesSettings] = None) -> None:
    """
    Load in-cluster or kubeconfig credentials into the kubernetes client

    Args:
        kube_settings: Kubernetes settings; defaults to the environment

    Raises:
        FileNotFoundError: If an explicit kubeconfig path does not exist
    """
    kube_settings = kube_settings or KubernetesSettings()

    if kube_settings.in_cluster:
        logger.info("Loading in-cluster config")
        k8s_config.load_incluster_config()
        return

    kubeconfig_path = kube_settings.kubeconfig_path
    if kubeconfig_path and not os.path.exists(kubeconfig_path):
        logger.error(f"Kubeconfig file not found at: {kubeconfig_path}")
        raise FileNotFoundError(f"Kubeconfig file not found: {kubeconfig_path}")

    logger.info(f"Loading kubeconfig from: {kubeconfig_path or 'default location'}")
    k8s_config.load_kube_config(config_file=kubeconfig_path)


class KubernetesPodLister(PodLister):
    """Lists pods on demand, one API call per request"""

    def __init__(self, core_api: Optional[client.CoreV1Api] = None, request_timeout: Optional[float] = None):
        """
        Initialize pod lister

        Args:
            core_api: CoreV1Api to use; a default one is created from the loaded config
            request_timeout: Per-request timeout in seconds passed to the API client
        """
        self.core_api = core_api or client.CoreV1Api()
        self.request_timeout = request_timeout

    @classmethod
    def from_settings(cls, kube_settings: KubernetesSettings) -> "KubernetesPodLister":
        load_kubernetes_config(kube_settings)
        return cls(request_timeout=kube_settings.request_timeout)

    def list_pods(self, namespace: str, selector: Optional[str], timeout: Optional[float] = None) -> List:
        """List pods; a per-call timeout takes precedence over the configured request_timeout"""
        kwargs = {}
        if selector:
            kwargs["label_selector"] = selector
        request_timeout = timeout if timeout is not None else self.request_timeout
        if request_timeout is not None:
            kwargs["_request_timeout"] = request_timeout

        pods = self.core_api.list_namespaced_pod(namespace, **kwargs)
        logger.debug(f"Listed {len(pods.items)} pods in {namespace} matching '{selector or ''}'")
        return list(pods.items)
