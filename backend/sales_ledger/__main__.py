import uvicorn

from sales_ledger.config import Config


def main():
    uvicorn.run("sales_ledger.main:app", host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    main()
