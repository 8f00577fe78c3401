from storefront.services.persister import JsonFilePersister, MemoryPersister


class TestMemoryPersister:
    def test_stores_a_copy(self):
        persister = MemoryPersister()
        data = {"items": [1, 2]}
        persister.save("cart", data)
        data["items"].append(3)

        assert persister.load("cart") == {"items": [1, 2]}
        assert persister.load("missing") is None


class TestJsonFilePersister:
    def test_round_trip(self, tmp_path):
        persister = JsonFilePersister(tmp_path / "data")
        persister.save("products", [{"sku": "P", "name": "Müsli"}])

        assert (tmp_path / "data" / "products.json").exists()
        assert not (tmp_path / "data" / "products.json.tmp").exists()
        assert JsonFilePersister(tmp_path / "data").load("products") == [{"sku": "P", "name": "Müsli"}]

    def test_missing_key(self, tmp_path):
        assert JsonFilePersister(tmp_path).load("cart") is None

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "cart.json").write_text("{not json", encoding="utf-8")
        assert JsonFilePersister(tmp_path).load("cart") is None

    def test_overwrite(self, tmp_path):
        persister = JsonFilePersister(tmp_path)
        persister.save("cart", {"items": [1]})
        persister.save("cart", {"items": []})
        assert persister.load("cart") == {"items": []}
