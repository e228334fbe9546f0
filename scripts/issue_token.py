import os
import sys
import json
import requests

# Usage: python scripts/issue_token.py <CLIENT> <ROUTE> '[{"nombre": "Leche", "cantidad": 2}]'
# Issues a delivery token and saves the QR PNG for it (OUT, default qr.png).

BASE_URL = os.environ.get('BASE_URL', 'http://localhost:3000').rstrip('/')

if len(sys.argv) < 3:
    print('Usage: issue_token.py <CLIENT> <ROUTE> [PRODUCTS_JSON]')
    sys.exit(1)

params = {
    'cliente': sys.argv[1],
    'ruta': sys.argv[2],
    'productos': sys.argv[3] if len(sys.argv) > 3 else '[]',
}

r = requests.get(f"{BASE_URL}/generate-token", params=params, timeout=30)
if r.status_code != 200:
    print('Error:', r.status_code, r.text)
    sys.exit(1)
res = r.json()
print(json.dumps(res, indent=2))

qr = requests.get(f"{BASE_URL}/qr-image/{res['token']}", timeout=30)
if qr.status_code != 200:
    print('QR error:', qr.status_code, qr.text)
    sys.exit(1)
out = os.environ.get('OUT', 'qr.png')
with open(out, 'wb') as f:
    f.write(qr.content)
print('PNG saved to', out)
