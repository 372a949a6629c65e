"""Backup metadata, naming and upload status.

- version: monotonic per-device backup version
- scheme: backup format tags
- metadata: metadata record, file name codec and upload status resolver
- storage: backup storage port and the directory-backed adapter
- resources: collaborators injected into the resolver and service
- service: backup creation, listing and pruning
"""
