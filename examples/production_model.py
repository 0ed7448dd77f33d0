"""
Regional production model
=========================

Loads production, transformation coefficients and transformed volumes
for two regions from a long-format table, derives secondary production
(juice) from the primary products and computes consumption.

Usage:
  pip install mdeq
  python production_model.py
"""

from io import StringIO

import pandas as pd

import mdeq
from mdeq import over, assign

DATA = """
reg prod   var        value
us  banana production 10
us  banana transfCoef 0.6
us  banana trValues   2
us  apples production 7
us  apples transfCoef 0.7
us  apples trValues   5
eu  banana production 5
eu  banana transfCoef 0.7
eu  banana trValues   1
eu  apples production 8
eu  apples transfCoef 0.8
eu  apples trValues   4
"""

products = ["banana", "apples", "juice"]
prim_pr = products[:2]
sec_pr = [products[2]]
reg = ["us", "eu"]

df = pd.read_csv(StringIO(DATA), sep=r"\s+")
production, transf_coef, tr_values = mdeq.load_vars(
    ["production", "transfCoef", "trValues"], df, ["reg", "prod"],
    var_name_col="var", verbose=True)
consumption = mdeq.define_vars(["reg", "prod"], [str, str])

# production[r in reg, sp in sec_pr] = sum(trValues[r, pp] * transfCoef[r, pp])
assign(production, [over("r", reg), over("sp", sec_pr)],
       lambda r, sp: sum(tr_values[r, pp] * transf_coef[r, pp] for pp in prim_pr),
       verbose=True)
# consumption[r in reg, pp in prim_pr] = production[r, pp] - trValues[r, pp]
assign(consumption, [over("r", reg), over("pp", prim_pr)],
       lambda r, pp: production[r, pp] - tr_values[r, pp], verbose=True)
# consumption[r in reg, sp in sec_pr] = production[r, sp]
assign(consumption, [over("r", reg), over("sp", sec_pr)],
       lambda r, sp: production[r, sp], verbose=True)

print(mdeq.to_frame(consumption).to_string(index=False))
total = sum(consumption[r, p] for r in reg for p in products)
print(f"\nTotal consumption: {total:.1f}")

report = mdeq.detect_store(consumption)
print(f"Store: {report['shape']}, density={report['density']:.0%}, "
      f"recommended={report['recommended']} ({report['reason']})")
