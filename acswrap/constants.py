"""Constants shared across acswrap."""

CLOUD_ACCESS_CONTROL_HOST = "accesscontrol.windows.net"
DEFAULT_WRAP_NAMESPACE_SUFFIX = "-sb"
DEFAULT_SERVICEBUS_ISSUER = "owner"

AZURE_WRAP_NAMESPACE = "AZURE_WRAP_NAMESPACE"
AZURE_SERVICEBUS_NAMESPACE = "AZURE_SERVICEBUS_NAMESPACE"
AZURE_SERVICEBUS_ISSUER = "AZURE_SERVICEBUS_ISSUER"
AZURE_SERVICEBUS_ACCESS_KEY = "AZURE_SERVICEBUS_ACCESS_KEY"

WRAP_PATH = "WRAPv0.9/"
WRAP_PROTOCOL = "https://"
WRAP_PORT = 443

CONTENT_TYPE_HEADER = "Content-Type"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
HTTP_OK = 200
