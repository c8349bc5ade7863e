import unittest

import bsnmgr


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(bsnmgr, "BsnManager"))
        self.assertTrue(hasattr(bsnmgr, "BsnConfig"))
        self.assertTrue(hasattr(bsnmgr, "NetworkResolver"))
        self.assertTrue(hasattr(bsnmgr, "ConfirmationGate"))
        self.assertTrue(hasattr(bsnmgr, "OperationExecutor"))

        self.assertTrue(hasattr(bsnmgr, "Network"))
        self.assertTrue(hasattr(bsnmgr, "Presentation"))
        self.assertTrue(hasattr(bsnmgr, "DeviceGroup"))
        self.assertTrue(hasattr(bsnmgr, "ExecutionReport"))

        self.assertTrue(hasattr(bsnmgr, "BsnMgrError"))
        self.assertTrue(hasattr(bsnmgr, "ResolutionError"))
        self.assertTrue(hasattr(bsnmgr, "GateError"))
        self.assertTrue(hasattr(bsnmgr, "ExecutorError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(bsnmgr, "__all__"))
        self.assertIn("BsnManager", bsnmgr.__all__)
        self.assertIn("BsnMgrError", bsnmgr.__all__)
        for name in bsnmgr.__all__:
            self.assertTrue(hasattr(bsnmgr, name), name)


if __name__ == "__main__":
    unittest.main()
