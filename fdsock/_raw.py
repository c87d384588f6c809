"""The cffi declarations for the socket API of the C library

We use cffi in ABI mode, so nothing is compiled; the declarations below must
match the platform's struct layouts exactly. There are three layouts we care
about: Linux (and most other SysV-ish platforms), the BSDs (which have a
length byte at the front of every sockaddr), and Windows.

"""
from cffi import FFI
import sys

__all__ = [
    "ffi",
    "lib",
    "WINDOWS",
    "BSD_SOCKADDR",
    "INVALID_SOCKET",
]

WINDOWS = sys.platform == 'win32'
BSD_SOCKADDR = sys.platform.startswith(('darwin', 'freebsd', 'openbsd', 'netbsd', 'dragonfly'))

if WINDOWS:
    _types = """
typedef uintptr_t SOCKET;
typedef int socklen_t;
typedef unsigned short sa_family_t;
typedef short hostent_short_or_int;
"""
    _call = "WINAPI"
elif BSD_SOCKADDR:
    _types = """
typedef int SOCKET;
typedef uint32_t socklen_t;
typedef uint8_t sa_family_t;
typedef int hostent_short_or_int;
"""
    _call = ""
else:
    _types = """
typedef int SOCKET;
typedef uint32_t socklen_t;
typedef unsigned short sa_family_t;
typedef int hostent_short_or_int;
"""
    _call = ""

if BSD_SOCKADDR:
    _sockaddr = """
struct sockaddr {
    uint8_t sa_len;
    sa_family_t sa_family;
    char sa_data[14];
};

struct sockaddr_in {
    uint8_t sin_len;
    sa_family_t sin_family;
    uint16_t sin_port;
    struct in_addr sin_addr;
    char sin_zero[8];
};
"""
else:
    _sockaddr = """
struct sockaddr {
    sa_family_t sa_family;
    char sa_data[14];
};

struct sockaddr_in {
    sa_family_t sin_family;
    uint16_t sin_port;
    struct in_addr sin_addr;
    unsigned char sin_zero[8];
};
"""

if WINDOWS:
    _platform_functions = """
int WINAPI WSAStartup(uint16_t wVersionRequested, void *lpWSAData);
int WINAPI WSAGetLastError(void);
int WINAPI closesocket(SOCKET s);
int WINAPI send(SOCKET s, const char *buf, int len, int flags);
int WINAPI recv(SOCKET s, char *buf, int len, int flags);
"""
else:
    _platform_functions = """
int close(SOCKET fd);
ssize_t send(SOCKET sockfd, const void *buf, size_t len, int flags);
ssize_t recv(SOCKET sockfd, void *buf, size_t len, int flags);
"""

ffi = FFI()
ffi.cdef(_types)
ffi.cdef("""
struct in_addr {
    uint32_t s_addr;
};

struct hostent {
    char *h_name;
    char **h_aliases;
    hostent_short_or_int h_addrtype;
    hostent_short_or_int h_length;
    char **h_addr_list;
};
""")
ffi.cdef(_sockaddr)
ffi.cdef(_platform_functions)
ffi.cdef("""
SOCKET {call} socket(int domain, int type, int protocol);
int {call} connect(SOCKET sockfd, const struct sockaddr *addr, socklen_t addrlen);
int {call} bind(SOCKET sockfd, const struct sockaddr *addr, socklen_t addrlen);
int {call} listen(SOCKET sockfd, int backlog);
SOCKET {call} accept(SOCKET sockfd, struct sockaddr *addr, socklen_t *addrlen);
int {call} setsockopt(SOCKET sockfd, int level, int optname, const void *optval, socklen_t optlen);
int {call} getsockopt(SOCKET sockfd, int level, int optname, void *optval, socklen_t *optlen);
struct hostent * {call} gethostbyname(const char *name);
""".format(call=_call))

if WINDOWS:
    lib = ffi.dlopen("ws2_32.dll")
else:
    # the C library of the running interpreter
    lib = ffi.dlopen(None)

INVALID_SOCKET = int(ffi.cast('SOCKET', -1))
