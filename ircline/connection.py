import socket


def identity(x):
    return x


class Factory:
    """
    A class for creating the sockets a Connection talks over.

    To create a simple connection:

    .. code-block:: python

       server_address = ('localhost', 6667)
       Factory()(server_address)

    To create an SSL connection:

    .. code-block:: python

       context = ssl.create_default_context()
       wrapper = functools.partial(context.wrap_socket, server_hostname='localhost')
       Factory(wrapper=wrapper)(('localhost', 6697))

    To create an IPv6 connection:

    .. code-block:: python

       Factory(ipv6=True)(server_address)

    The timeout (in seconds) applies to every blocking operation on the
    socket, reads included; a read timing out ends the connection.

    Note that Factory doesn't save the state of the socket itself. The
    caller must do that, as necessary. As a result, the Factory may be
    re-used to create new connections with the same settings.
    """

    family = socket.AF_INET

    def __init__(self, bind_address=None, wrapper=identity, ipv6=False, timeout=None):
        self.bind_address = bind_address
        self.wrapper = wrapper
        self.timeout = timeout
        if ipv6:
            self.family = socket.AF_INET6

    def connect(self, server_address):
        sock = self.wrapper(socket.socket(self.family, socket.SOCK_STREAM))
        try:
            sock.settimeout(self.timeout)
            self.bind_address and sock.bind(self.bind_address)
            sock.connect(server_address)
        except OSError:
            sock.close()
            raise
        return sock

    __call__ = connect
