"""
Services package for the Catalog Search Proxy.

Service classes orchestrate the search workflow between the API layer and the
catalog adaptor. They depend on the adaptor interface, not on a transport.
"""
