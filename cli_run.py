from __future__ import annotations
import argparse
import json
import logging

import dotenv
dotenv.load_dotenv()

from veribridge.config import load_config
from veribridge.pipeline import AddressAuditPipeline


def main(argv=None):
    ap = argparse.ArgumentParser(description="Audit a sheet of address components and write an Excel report.")
    ap.add_argument("input", help=".xlsx or .csv with building/street/area/city/state/postal_code/country columns")
    ap.add_argument("-o", "--output", help="report workbook (default: report_path from config)")
    ap.add_argument("-j", "--jurisdiction", help="jurisdiction code, e.g. KE (default: from config)")
    ap.add_argument("-c", "--config", help="config JSON (default: data/config.default.json)")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pipe = AddressAuditPipeline(cfg)
    result = pipe.run(args.input, args.output, jurisdiction=args.jurisdiction)
    print("Audit finished:", json.dumps(result, ensure_ascii=False, indent=2))
    return result


if __name__ == "__main__":
    main()
