import uvicorn
import sys
import re

def is_valid_ip(ip):
    pattern = r'^(\d{1,3}\.){3}\d{1,3}$'
    if re.match(pattern, ip):
        octets = ip.split('.')
        return all(0 <= int(octet) <= 255 for octet in octets)
    return False

def is_valid_port(port):
    return port.isdigit() and 0 <= int(port) <= 65535

def option_value(name, example):
    try:
        return sys.argv[sys.argv.index(name) + 1]
    except IndexError:
        print(f"Argument {name} requires value (ex. '{name} {example}')")
        sys.exit(1)

if __name__ == "__main__":

    args = {
        "app": "janmitra.main:app",
        "host": "0.0.0.0",
        "port": 8000,
        "reload": False,
        "reload_excludes": ["janmitra/alembic/*", "janmitra/alembic/versions/*.py", "janmitra/media/*"]
    }

    if "--https" in sys.argv:
        args.update({
            "ssl_keyfile": "janmitra/key.pem",
            "ssl_certfile": "janmitra/cert.pem"
        })

    if "--dev" in sys.argv:
        args.update({
            "reload": True,
        })

    if "--host" in sys.argv:
        host = option_value("--host", "0.0.0.0")

        if not is_valid_ip(host):
            print("Invalid host")
            sys.exit(1)

        args.update({
            "host": host
        })

    if "--port" in sys.argv:
        port = option_value("--port", "80")

        if not is_valid_port(port):
            print("Invalid port")
            sys.exit(1)

        args.update({
            "port": int(port)
        })

    uvicorn.run(**args)
