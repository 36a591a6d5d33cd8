"""Student Records package.

Organised by feature modules (identity, records, reports, auth, ...) with a thin
Flask controller layer over service/repository layers. Storage and
authentication backends are injected through the container.
"""
