"""
TREE Uniformes - CLI Admin
Herramienta de linea de comandos para operar la tienda

Uso:
    python admin_cli.py login
    python admin_cli.py stats
    python admin_cli.py orders list [status]
    python admin_cli.py orders status <order_id> <nuevo_status>
    python admin_cli.py inventory list [--low]
    python admin_cli.py quotes list [status]
"""
import os
import sys
import getpass
import httpx
from pathlib import Path

BASE_URL = os.getenv("STORE_API_URL", "http://localhost:5000")
TOKEN_FILE = Path(".admin_token")


def save_token(token: str):
    TOKEN_FILE.write_text(token)


def load_token() -> str:
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text().strip()
    return None


def get_headers():
    token = load_token()
    if not token:
        print("Error: primero inicia sesion con 'python admin_cli.py login'")
        sys.exit(1)
    return {"Authorization": f"Bearer {token}"}


def _error(response: httpx.Response) -> str:
    try:
        return response.json().get("detail", response.text)
    except ValueError:
        return response.text


def cmd_login():
    """Login de administrador"""
    username = input("Usuario [admin]: ").strip() or "admin"
    password = getpass.getpass("Contraseña: ")

    try:
        response = httpx.post(
            f"{BASE_URL}/api/auth/login",
            json={"username": username, "password": password}
        )
    except httpx.HTTPError as e:
        print(f"✗ Error de conexion: {e}")
        return

    if response.status_code == 200:
        data = response.json()
        if data["user"]["role"] != "admin":
            print("✗ El usuario no es administrador")
            return
        save_token(data["access_token"])
        print("\n✓ Sesion iniciada")
        print(f"  Usuario: {data['user']['username'] or data['user']['email']}")
    else:
        print(f"✗ Error: {_error(response)}")


def cmd_stats():
    try:
        response = httpx.get(f"{BASE_URL}/api/dashboard/stats", headers=get_headers())
    except httpx.HTTPError as e:
        print(f"✗ Error: {e}")
        return

    if response.status_code != 200:
        print(f"✗ Error: {_error(response)}")
        return

    stats = response.json()
    print(f"\n{'='*40}")
    print("  TREE UNIFORMES - RESUMEN")
    print(f"{'='*40}")
    print(f"  Ventas de hoy: ${stats['total_sales']}")
    print(f"  Pedidos pendientes: {stats['new_orders']}")
    print(f"  Productos activos: {stats['active_products']}")
    print(f"  Clientes: {stats['total_customers']}")
    print(f"  Mensajes sin leer: {stats['unread_messages']}")
    print(f"  Variantes con stock bajo: {stats['low_stock_variants']}")
    for status, count in stats["quotes_by_status"].items():
        print(f"    - Cotizaciones {status}: {count}")
    print(f"{'='*40}")


def cmd_orders_list(status: str = None):
    params = {"limit": 100}
    if status:
        params["status"] = status
    try:
        response = httpx.get(f"{BASE_URL}/api/orders", params=params, headers=get_headers())
    except httpx.HTTPError as e:
        print(f"✗ Error: {e}")
        return

    if response.status_code != 200:
        print(f"✗ Error: {_error(response)}")
        return

    data = response.json()
    print(f"\n{'='*78}")
    print(f"{'ID':<6} | {'Folio':<16} | {'Cliente':<22} | {'Status':<11} | {'Total':>10}")
    print(f"{'='*78}")
    for o in data["orders"]:
        name = (o["customer_name"] or o["customer_email"] or "Invitado")[:22]
        print(f"{o['id']:<6} | {o['order_number']:<16} | {name:<22} | {o['status']:<11} | {o['total']:>10}")
    print(f"\nTotal: {data['total']} pedidos")


def cmd_orders_status(order_id: str, new_status: str):
    try:
        response = httpx.put(
            f"{BASE_URL}/api/orders/{order_id}/status",
            json={"status": new_status},
            headers=get_headers()
        )
    except httpx.HTTPError as e:
        print(f"✗ Error: {e}")
        return

    if response.status_code == 200:
        order = response.json()
        print(f"✓ Pedido {order['order_number']}: {order['status_label']}")
    else:
        print(f"✗ Error: {_error(response)}")


def cmd_inventory_list(low_only: bool = False):
    try:
        response = httpx.get(
            f"{BASE_URL}/api/inventory",
            params={"low_stock": "true"} if low_only else None,
            headers=get_headers()
        )
    except httpx.HTTPError as e:
        print(f"✗ Error: {e}")
        return

    if response.status_code != 200:
        print(f"✗ Error: {_error(response)}")
        return

    rows = response.json()
    print(f"\n{'='*80}")
    print(f"{'Producto':<28} | {'Talla':<6} | {'Color':<12} | {'Exist.':>6} | {'Apart.':>6} | {'Disp.':>5} | Estado")
    print(f"{'='*80}")
    for r in rows:
        name = (r["product_name"] or str(r["product_id"]))[:28]
        print(
            f"{name:<28} | {(r['size'] or '-'):<6} | {(r['color'] or '-')[:12]:<12} | "
            f"{r['quantity']:>6} | {r['reserved_quantity']:>6} | {r['available']:>5} | {r['stock_label']}"
        )
    print(f"\nTotal: {len(rows)} variantes")


def cmd_quotes_list(status: str = None):
    try:
        response = httpx.get(
            f"{BASE_URL}/api/quotes",
            params={"status": status} if status else None,
            headers=get_headers()
        )
    except httpx.HTTPError as e:
        print(f"✗ Error: {e}")
        return

    if response.status_code != 200:
        print(f"✗ Error: {_error(response)}")
        return

    quotes = response.json()
    print(f"\n{'='*80}")
    print(f"{'ID':<6} | {'Folio':<16} | {'Cliente':<22} | {'Status':<9} | {'Total':>10} | Vence")
    print(f"{'='*80}")
    for q in quotes:
        name = (q["customer_name"] or q["customer_email"] or "-")[:22]
        valid_until = (q["valid_until"] or "")[:10]
        print(f"{q['id']:<6} | {q['quote_number']:<16} | {name:<22} | {q['status']:<9} | {q['total']:>10} | {valid_until}")
    print(f"\nTotal: {len(quotes)} cotizaciones")


def print_help():
    print("""
TREE Uniformes - CLI Admin
==========================

Comandos disponibles:

  python admin_cli.py login                              - Iniciar sesion
  python admin_cli.py stats                              - Resumen del dashboard

  python admin_cli.py orders list [status]               - Listar pedidos
  python admin_cli.py orders status <id> <status>        - Cambiar status
                                                           processing, shipped, delivered, cancelled

  python admin_cli.py inventory list [--low]             - Existencias (--low: solo stock bajo)

  python admin_cli.py quotes list [status]               - Listar cotizaciones

Variables:
  STORE_API_URL   URL base de la API (default http://localhost:5000)
""")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print_help()
        sys.exit(0)

    cmd = sys.argv[1].lower()

    if cmd == "login":
        cmd_login()
    elif cmd == "stats":
        cmd_stats()
    elif cmd == "orders":
        if len(sys.argv) < 3:
            print("Uso: orders [list|status]")
        elif sys.argv[2] == "list":
            cmd_orders_list(sys.argv[3] if len(sys.argv) > 3 else None)
        elif sys.argv[2] == "status" and len(sys.argv) >= 5:
            cmd_orders_status(sys.argv[3], sys.argv[4])
        else:
            print("Uso: orders status <order_id> <nuevo_status>")
    elif cmd == "inventory":
        if len(sys.argv) >= 3 and sys.argv[2] == "list":
            cmd_inventory_list("--low" in sys.argv[3:])
        else:
            print("Uso: inventory list [--low]")
    elif cmd == "quotes":
        if len(sys.argv) >= 3 and sys.argv[2] == "list":
            cmd_quotes_list(sys.argv[3] if len(sys.argv) > 3 else None)
        else:
            print("Uso: quotes list [status]")
    elif cmd == "help":
        print_help()
    else:
        print(f"Comando desconocido: {cmd}")
        print_help()
