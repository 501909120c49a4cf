from catalog_crawler.cli import main

if __name__ == "__main__":
    # Same as ``python -m catalog_crawler`` or the ``catalog-crawler`` script.
    raise SystemExit(main())
