#!/usr/bin/env python3
import sys, json, redis

# Usage: python scripts/check_redis.py <REDIS_URL>
# Dumps both delivery collections and whether their locks are held

if len(sys.argv) < 2:
    print("Usage: check_redis.py <REDIS_URL>")
    sys.exit(1)

url = sys.argv[1].strip()
r = redis.from_url(url, decode_responses=True)

out = {'redis': url}
for key in ('pending-deliveries', 'confirmed-deliveries'):
    raw = r.get(key)
    out[key] = json.loads(raw) if raw else None
    out[f'lock:{key}'] = r.exists(f'lock:{key}') == 1

print(json.dumps(out, indent=2))
